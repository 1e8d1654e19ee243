#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
# a calendar date serialised as 8 digits, YYYYMMDD
DateStr = str
# a date typed by the user when searching tasks, DD.MM.YYYY
SearchDateStr = str
# the textual encoding of a recurrence rule (eg "d 3", "w 1,3", "m 15,-1 1,6")
RuleStr = str
# the integer identifying a stored task
TaskId = int
