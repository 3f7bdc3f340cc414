"""Package version metadata."""

VERSION = "2.0.0"
PROJECT_URL = "https://github.com/keithrbennett/rika"
