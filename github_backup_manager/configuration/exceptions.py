"""Contains exceptions raised when reconciling application configuration."""


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing required configuration element: {name} (command line {cli_name}, environment variable {env_name})")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name


class InvalidConfigurationValueError(Exception):
    """Raised when a configuration element has a value outside its allowed range."""

    def __init__(self, name: str, value: object, expectation: str) -> None:
        """Initializes the exception with the offending element and value."""
        super().__init__(f"Invalid value for {name}: {value!r} ({expectation})")
        self.name = name
        self.value = value
        self.expectation = expectation
