"""Source address allowlist."""

import ipaddress
import logging
from typing import Iterable, Union

from zoom_relay.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def normalize_address(raw: str) -> IPAddress:
    """
    Parse an address, collapsing IPv4-mapped IPv6 forms to IPv4.

    Raises:
        ValueError: if ``raw`` is not an IP address
    """
    candidate = raw.strip().strip("[]")
    address = ipaddress.ip_address(candidate)
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        return address.ipv4_mapped
    return address


class AddressAllowlist:
    """Set of address ranges allowed to reach the relay."""

    def __init__(self, networks: Iterable[IPNetwork]):
        self.networks: tuple[IPNetwork, ...] = tuple(networks)
        if not self.networks:
            raise ConfigurationError("At least one allowed address range is required")

    @classmethod
    def from_config(cls, value: str | None) -> "AddressAllowlist":
        """
        Parse a comma separated list of CIDR blocks.

        Bare addresses are accepted as single-host ranges. Host bits set
        in a block (``10.0.0.1/8``) are masked off.

        Raises:
            ConfigurationError: if the list is empty or an entry is malformed
        """
        networks: list[IPNetwork] = []
        for entry in (value or "").split(","):
            entry = entry.strip()
            if not entry:
                continue
            try:
                networks.append(ipaddress.ip_network(entry, strict=False))
            except ValueError as e:
                raise ConfigurationError(
                    f"Malformed address range: {entry!r}",
                    details={"range": entry},
                ) from e
        return cls(networks)

    def is_allowed(self, raw_address: str | None) -> bool:
        """
        Check whether an address falls in any configured range.

        Malformed or missing input is treated as not allowed.
        """
        if not raw_address:
            logger.warning("Missing source address")
            return False
        try:
            address = normalize_address(raw_address)
        except ValueError:
            logger.warning(f"Unparseable source address: {raw_address!r}")
            return False
        return any(address in network for network in self.networks)

    def __len__(self) -> int:
        return len(self.networks)

    def __repr__(self) -> str:
        ranges = ", ".join(str(n) for n in self.networks)
        return f"AddressAllowlist([{ranges}])"
