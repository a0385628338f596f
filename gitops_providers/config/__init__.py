"""Configuration for provider access and workflow tunables.

Key Components:
    - ProviderSettings: tokens, API base URLs and workflow settings, loaded
      from the environment or a YAML file
    - WaitConfig: eventual-consistency polling bounds
    - ProviderOptions: immutable options passed into GitProvider

Example:
    >>> from gitops_providers.config import ProviderSettings
    >>> settings = ProviderSettings.from_yaml("gitops.yaml")
    >>> options = settings.to_options()
"""

from gitops_providers.config.settings import ProviderOptions, ProviderSettings, WaitConfig

__all__ = ["ProviderOptions", "ProviderSettings", "WaitConfig"]
