"""Chrome vendor options and preset capability builders."""

from __future__ import annotations

from typing import ClassVar, Dict, List, Optional

from pydantic import ConfigDict, Field, JsonValue

from .document import CapabilityDocument, PreferenceValue, VendorOptions, WireModel

CHROME_BROWSER_NAME = "chrome"

# chromedriver accepts keys not modelled here (for example "w3c"); keep them.
_PASS_THROUGH = ConfigDict(populate_by_name=True, extra="allow")


class DeviceMetrics(WireModel):
    model_config = _PASS_THROUGH

    width: int
    height: int
    pixel_ratio: float = Field(alias="pixelRatio")
    touch: bool = True


class MobileEmulation(WireModel):
    """Either a named device or explicit metrics plus user agent."""

    model_config = _PASS_THROUGH

    device_name: Optional[str] = Field(default=None, alias="deviceName")
    device_metrics: Optional[DeviceMetrics] = Field(default=None, alias="deviceMetrics")
    user_agent: Optional[str] = Field(default=None, alias="userAgent")


class PerfLoggingPrefs(WireModel):
    model_config = _PASS_THROUGH

    enable_network: Optional[bool] = Field(default=None, alias="enableNetwork")
    enable_page: Optional[bool] = Field(default=None, alias="enablePage")
    trace_categories: Optional[str] = Field(default=None, alias="traceCategories")
    buffer_usage_reporting_interval: Optional[int] = Field(
        default=None, alias="bufferUsageReportingInterval"
    )


class ChromeOptions(VendorOptions):
    """Options encoded under ``goog:chromeOptions``."""

    model_config = _PASS_THROUGH

    vendor_key: ClassVar[str] = "goog:chromeOptions"
    __pydantic_extra__: Dict[str, JsonValue] = Field(init=False)

    args: Optional[List[str]] = None
    binary: Optional[str] = None
    extensions: Optional[List[str]] = None
    prefs: Optional[Dict[str, PreferenceValue]] = None
    detach: Optional[bool] = None
    debugger_address: Optional[str] = Field(default=None, alias="debuggerAddress")
    exclude_switches: Optional[List[str]] = Field(default=None, alias="excludeSwitches")
    minidump_path: Optional[str] = Field(default=None, alias="minidumpPath")
    mobile_emulation: Optional[MobileEmulation] = Field(default=None, alias="mobileEmulation")
    perf_logging_prefs: Optional[PerfLoggingPrefs] = Field(default=None, alias="perfLoggingPrefs")
    window_types: Optional[List[str]] = Field(default=None, alias="windowTypes")

    def add_argument(self, argument: str) -> None:
        self.args = [*(self.args or []), argument]


def chrome_capabilities(options: Optional[ChromeOptions] = None) -> CapabilityDocument:
    """Return a Chrome document, with ``options`` nested under the vendor key."""

    document = CapabilityDocument(browser_name=CHROME_BROWSER_NAME)
    if options is not None:
        document.set_extension(ChromeOptions.vendor_key, options)
    return document


def chrome_options(document: CapabilityDocument) -> Optional[ChromeOptions]:
    options = document.extension(ChromeOptions.vendor_key)
    if options is None or isinstance(options, ChromeOptions):
        return options
    return ChromeOptions.model_validate(options)


def chrome_standard() -> CapabilityDocument:
    return chrome_capabilities(ChromeOptions(args=["--start-maximized"]))


def chrome_headless() -> CapabilityDocument:
    return chrome_capabilities(
        ChromeOptions(args=["--headless", "--disable-gpu", "--window-size=1920,1080"])
    )


def chrome_with_user_profile(profile_path: str) -> CapabilityDocument:
    return chrome_capabilities(ChromeOptions(args=[f"--user-data-dir={profile_path}"]))


PRESETS = {
    "standard": chrome_standard,
    "headless": chrome_headless,
}
