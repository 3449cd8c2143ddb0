"""Release identity of the auditor itself."""

__all__ = ["__version__", "PROJECT_NAME", "CONFIG_SCHEMA_VERSION"]

#: Semantic version of this codebase; the auditor's own docs and manifest must agree with it.
__version__ = "0.1.0"

#: Distribution and console-script name.
PROJECT_NAME = "release-audit"

#: Version of the JSON config layout read by AuditConfig.from_file.
CONFIG_SCHEMA_VERSION = 1
