"""fileexplorer - file manager toolkit with privileged command relaunch.

Failed filesystem commands are classified into a closed set of failure
kinds, surfaced as a toast or a dialog, and, when the failure was caused by
missing privileges, re-run under an elevated console after asking the user.
"""

__version__ = "0.4.0"

__all__ = ["__version__"]
