#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
PACKAGE_NAME = "taskplan"
CONFIG_MODULE = f"{PACKAGE_NAME}.configs"
CONFIG_NAME = "scheduler"
DATE_FORMAT = "%Y%m%d"
SEARCH_DATE_FORMAT = "%d.%m.%Y"
DEFAULT_DB_FILE = "scheduler.json"
DEFAULT_SEARCH_LIMIT = 50
MAX_DAILY_INTERVAL = 400
DAYS_IN_WEEK = 7
MONTHS_IN_YEAR = 12
LAST_DAY_MARK = -1
SECOND_TO_LAST_DAY_MARK = -2
MAX_DAY_MARK = 31
JSON_INDENT = 4
