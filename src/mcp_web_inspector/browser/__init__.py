"""Chrome WebDriver lifecycle and network capture."""
