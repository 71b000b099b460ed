# Replaced with the release number when a release is made

import subprocess

try:
    version = subprocess.check_output(
        ['git', 'describe', '--dirty'], stderr=subprocess.DEVNULL,
        text=True).strip()
except (OSError, subprocess.CalledProcessError):
    version = "unknown (not a release, and not running from a git checkout)"
