class ConfigurationError(RuntimeError):
    """Invalid or missing run configuration. Always raised before any solve runs."""


class MissingInputFile(ConfigurationError):
    def __init__(self, filename):
        self.filename = filename
        super().__init__(f"File <{filename}> not found")


class UnsupportedPackingType(ConfigurationError):
    def __init__(self, name, valid):
        self.name = name
        super().__init__(f"Invalid Keyword:: /PackingType/: {name}. Only the following {list(valid)} are valid")


class UnsupportedCrossSection(ConfigurationError):
    def __init__(self, name, valid):
        self.name = name
        super().__init__(f"Invalid Keyword:: /CrossSection/: {name}. Only the following {list(valid)} are valid")


class ExternalEngineError(RuntimeError):
    """A failure raised from inside the simulation engine primitives."""
