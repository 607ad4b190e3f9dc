"""
Service Center selectors, page paths and fixed waits.

Selectors are generated ids scraped from the rendered console markup; they
change when the vendor rebuilds the console and are kept in one place.
"""

from __future__ import annotations

# Paths relative to the Service Center root
MODULE_LIST_PATH = "eSpaces_List.aspx"

# Login form
LOGIN_USERNAME_INPUT = "#wt89_wtContentRight_wtInput1"
LOGIN_PASSWORD_INPUT = "#wt89_wtContentRight_wtInputPass1"
LOGIN_SUBMIT_BUTTON = "#wt89_wtContentRight_wt59_wtColumnsItems_wt33_wtContent_wtButton1"

# Module list: status filter
STATUS_FILTER_DROPDOWN = (
    "#wt150_wtContentMain_wtFilters_wt7_wtColumnsItems_wt8_wtContent"
    "_wtContentColumn3_wtStatusComboBox"
)
STATUS_FILTER_WARNINGS_OPTION = (
    "#choices-wt150_wtContentMain_wtFilters_wt7_wtColumnsItems_wt8_wtContent"
    "_wtContentColumn3_wtSelectStatus_WithDeploy-item-choice-3"
)
STATUS_FILTER_SELECT = (
    "#wt150_wtContentMain_wtFilters_wt7_wtColumnsItems_wt8_wtContent"
    "_wtContentColumn3_wtSelectStatus_WithDeploy"
)
STATUS_FILTER_APPLY_BUTTON = (
    "#wt150_wtContentMain_wtFilters_wt7_wtColumnsItems_wt1_wtContent"
    "_wtContentColumn5_wtButton1"
)
# Expected <select> state once "with errors and warnings" is chosen
STATUS_FILTER_WARNINGS_VALUE = "__ossli_2"
STATUS_FILTER_WARNINGS_TEXT = "with errors and warnings"
# Settle time between picking the option and applying the filter (ms)
STATUS_FILTER_SETTLE_MS = 1000

# Module list: table and pagination
MODULE_LIST_TABLE = "table#wt150_wtContentMain_wt45_wtListPlacholder_wtListEspaces"
NO_MODULES_TITLE = "#wt150_wtContentMain_wt101_wtTitle"
NO_MODULES_TEXT = "No Modules to show"
NEXT_PAGE_LINK = "a#wt150_wtContentMain_wt45_wtTopLinksPlaceholderRight_wtLink9"
TABLE_ROWS = "table tbody tr"
WARNING_ICON = "img[src*='Icon_Warning.svg']"
MODULE_LINK = "a.link"
MODULE_NAME = "a.link span[data-name='espaceedit']"

# Names containing this (case-insensitive) are never collected
EXCLUDED_NAME_MARKER = "sandbox"

# Module page
MODULE_STATUS_LABEL = "label#wt1482_wtContentTop_wt65_wtColumnsItems_wt858_wtContent_wtStatus"
MODULE_VERSIONS_TABLE = (
    "#wt1482_wtContentMain_wt908_wtTabs_Content_wt1152_wtContent_wt1120_wtListPlacholder"
)
PUBLISHED_VERSION_TICK = "td:nth-child(4) .osicon-tick.text-success-4"
PUBLISH_BUTTON = "input[value='Publish']"
PUBLISH_PROGRESS_BAR = "#wt29_wtContentMain_wtProgressBarBlock_wtProgress"
PUBLISH_PROGRESS_STEP = "tr.steps-item-current"

# Playwright navigation readiness (puppeteer's networkidle2 counterpart)
WAIT_UNTIL = "networkidle"

# Browser context
VIEWPORT = {"width": 1920, "height": 1080}
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
