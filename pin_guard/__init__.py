"""pin-guard: require GitHub Actions references to be pinned to full commit SHAs."""

__version__ = "0.1.0"
