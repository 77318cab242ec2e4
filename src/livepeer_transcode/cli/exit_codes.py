"""Process exit statuses used by livepeer-transcode commands.

Codes below 10 cover runtime failures. 10-19 are rejected arguments or
configuration, and 20-29 are problems with the files named on the command
line.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0

    GENERAL_ERROR = 1
    # the job started and failed (segmenting, API or output writing)
    TRANSCODE_FAILED = 2

    CONFIG_ERROR = 11
    PROFILE_ERROR = 12

    TARGET_NOT_FOUND = 20
