# constants.py
"""This module defines constants across the codebase"""

# Sentinel for unset values
# This is used to differentiate between a value that is set to None
# and a value that is not set at all.
UNSET = object()

# Root logger name for the package
LOGGER_NAME = "chainderive"

# Where a derive method was registered from
SOURCE_BUILTIN = "builtin"

# Storage modules that host the council collective, by historical name
COUNCIL_MODULES = ["council"]

# Storage modules that host the technical committee collective
TECHNICAL_COMMITTEE_MODULES = ["technicalCommittee"]

# Storage modules that have hosted phragmen elections, newest first
ELECTIONS_MODULES = ["phragmenElection", "electionsPhragmen", "elections", "council"]

# Storage modules that host parachain registration
PARACHAINS_MODULES = ["parachains", "registrar"]
