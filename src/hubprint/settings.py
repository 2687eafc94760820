"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support,
e.g. HUBPRINT_SERIAL__PORT=/dev/ttyUSB0 or HUBPRINT_WIRELESS__PACING=0.1.
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WirelessSettings(BaseModel):
    """Bluetooth LE printer settings."""

    # Device filter
    service_uuid: str = "000018f0-0000-1000-8000-00805f9b34fb"
    name_prefixes: list[str] = Field(default=["RPP", "Printer"])

    # Writable characteristic on the printer service
    characteristic_uuid: str = "00002af1-0000-1000-8000-00805f9b34fb"

    # Link flow control
    chunk_size: int = Field(default=512, ge=1)
    pacing: float = Field(default=0.05, ge=0.0)  # seconds after each chunk

    scan_timeout: float = Field(default=10.0, gt=0.0)


class SerialSettings(BaseModel):
    """USB/serial printer settings."""

    vendor_ids: list[int] = Field(default=[0x0416, 0x04B8])  # Winbond, Epson
    baudrate: int = 9600

    # Explicit port path, bypasses the vendor filter
    port: Optional[str] = None


class ReceiptSettings(BaseModel):
    """Receipt content settings."""

    tagline: str = "Work + Study"
    network_label: str = "Sunny Side Up Work + Study"
    currency: str = "PHP"
    thank_you: str = "Thank you for studying with us!"
    package_placeholder: str = "N/A"

    session_prefix_length: int = Field(default=8, ge=1)
    divider_width: int = Field(default=32, ge=1)

    # QR legibility on 58mm paper
    qr_size: int = Field(default=6, ge=1, le=16)
    qr_error_correction: int = Field(default=1, ge=0, le=3)  # M
    qr_store_delay: float = Field(default=0.1, ge=0.0)

    encoding: str = "utf-8"
    timestamp_format: str = "%m/%d/%Y, %I:%M:%S %p"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="HUBPRINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Hardware round-trip limits, None blocks indefinitely
    connect_timeout: Optional[float] = Field(default=20.0, gt=0.0)
    write_timeout: Optional[float] = Field(default=10.0, gt=0.0)

    # Transports can be switched off even if the platform supports them
    wireless_enabled: bool = True
    serial_enabled: bool = True

    # Nested settings
    wireless: WirelessSettings = Field(default_factory=WirelessSettings)
    serial: SerialSettings = Field(default_factory=SerialSettings)
    receipt: ReceiptSettings = Field(default_factory=ReceiptSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
