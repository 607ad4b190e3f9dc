"""
Playwright helpers for the Service Center console.

Everything vendor-specific (selectors, login form, list pagination, module
page layout, dialogs) lives in this package; the pipelines import from here.
"""

from __future__ import annotations

from republisher.console.browser import (
    BrowserFactory,
    browser_launcher,
    create_console_context,
    new_console_page,
)
from republisher.console.dialogs import accept_next_dialog
from republisher.console.errors import ConsoleError, LoginError, NavigationError, ScanError
from republisher.console.listing import (
    apply_warning_filter,
    go_to_next_page,
    has_next_page,
    module_list_url,
    no_modules_shown,
    read_warning_rows,
)
from republisher.console.module_page import (
    find_publish_button,
    is_module_in_warning,
    wait_for_publish_progress,
)
from republisher.console.navigation import classify_failure, goto, navigate_with_retry
from republisher.console.session import login

__all__ = [
    # browser
    "BrowserFactory",
    "browser_launcher",
    "create_console_context",
    "new_console_page",
    # dialogs
    "accept_next_dialog",
    # errors
    "ConsoleError",
    "LoginError",
    "NavigationError",
    "ScanError",
    # listing
    "apply_warning_filter",
    "go_to_next_page",
    "has_next_page",
    "module_list_url",
    "no_modules_shown",
    "read_warning_rows",
    # module page
    "find_publish_button",
    "is_module_in_warning",
    "wait_for_publish_progress",
    # navigation
    "classify_failure",
    "goto",
    "navigate_with_retry",
    # session
    "login",
]
