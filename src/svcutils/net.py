"""Minimal ``host:port`` value type."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HostAndPort:
    host: str
    port: int

    @classmethod
    def parse(cls, value: str) -> "HostAndPort":
        """Parse ``"host:port"``.

        Raises:
            ValueError: ``value`` is not exactly two ``:``-separated parts, or the
                port is not a base-10 integer.
        """
        parts = value.split(":")
        if len(parts) != 2:
            raise ValueError(f"{value} is not in format host:port")
        host, port = parts
        return cls(host=host, port=int(port, 10))

    @classmethod
    def parse_or_default(
        cls, value: str | None, default_host: str, default_port: int
    ) -> "HostAndPort":
        """Parse ``value``, falling back to the defaults when it is blank or ``None``."""
        if value is None or not value.strip():
            return cls(host=default_host, port=default_port)
        return cls.parse(value)

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"
