class BeatwiseError(Exception):
    """Base Exception Class"""
    pass


class SourceUnavailable(BeatwiseError):
    """The record source could not be read or parsed"""
    pass


class RecordSchemaError(BeatwiseError):
    """The record source is missing a required field"""
    pass


class ConfigError(BeatwiseError):
    """Config Error"""
    pass
