"""Capability documents and vendor extensions."""

from .chrome import (  # noqa: F401
    PRESETS,
    ChromeOptions,
    DeviceMetrics,
    MobileEmulation,
    PerfLoggingPrefs,
    chrome_capabilities,
    chrome_headless,
    chrome_options,
    chrome_standard,
    chrome_with_user_profile,
)
from .document import (  # noqa: F401
    CapabilityDocument,
    PageLoadStrategy,
    PreferenceValue,
    ProxyConfiguration,
    ProxyType,
    Timeouts,
    UnhandledPromptBehavior,
    VendorOptions,
)
