"""Options shared by the walker, the tag table and the audit operations."""

from dataclasses import dataclass, field

from tagtree.core.constants import DEFAULT_SIDECAR_NAMES, ConfigKey, SidecarNames


@dataclass(frozen=True)
class IndexOptions:
    """How a directory tree is indexed.

    Attributes:
        sidecar_names: Primary, legacy and backup sidecar file names
        infer_formats: Add image/video/audio/document tags from file extensions
    """

    sidecar_names: SidecarNames = field(default_factory=lambda: DEFAULT_SIDECAR_NAMES)
    infer_formats: bool = False

    @classmethod
    def from_config(cls, config) -> "IndexOptions":
        """Build options from a ConfigManager.

        Args:
            config: ConfigManager (anything with ``get(key, default)``)

        Returns:
            IndexOptions with configured values, defaults elsewhere
        """
        names = SidecarNames(
            primary=config.get(ConfigKey.SIDECAR_PRIMARY, DEFAULT_SIDECAR_NAMES.primary),
            legacy=config.get(ConfigKey.SIDECAR_LEGACY, DEFAULT_SIDECAR_NAMES.legacy),
            backup=config.get(ConfigKey.SIDECAR_BACKUP, DEFAULT_SIDECAR_NAMES.backup),
        )
        return cls(
            sidecar_names=names,
            infer_formats=bool(config.get(ConfigKey.INDEX_FORMATS, False)),
        )

