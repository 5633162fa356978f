"""Well-known service names for common port/protocol pairs."""

from __future__ import annotations

_COMMON_SERVICES: dict[tuple[int, str], str] = {
    # System services
    (20, "tcp"): "ftp-data",
    (21, "tcp"): "ftp",
    (22, "tcp"): "ssh",
    (23, "tcp"): "telnet",
    (25, "tcp"): "smtp",
    (53, "tcp"): "dns",
    (53, "udp"): "dns",
    (67, "udp"): "dhcp",
    (68, "udp"): "dhcp",
    (69, "udp"): "tftp",
    (80, "tcp"): "http",
    (110, "tcp"): "pop3",
    (123, "udp"): "ntp",
    (137, "udp"): "netbios-ns",
    (139, "tcp"): "netbios-ssn",
    (143, "tcp"): "imap",
    (161, "udp"): "snmp",
    (179, "tcp"): "bgp",
    (443, "tcp"): "https",
    (443, "udp"): "quic",
    (445, "tcp"): "smb",
    (465, "tcp"): "smtps",
    (514, "udp"): "syslog",
    (587, "tcp"): "submission",
    (636, "tcp"): "ldaps",
    (853, "tcp"): "dns-tls",
    (993, "tcp"): "imaps",
    (995, "tcp"): "pop3s",
    (5353, "udp"): "mdns",
    # Databases and infrastructure
    (1433, "tcp"): "mssql",
    (1521, "tcp"): "oracle",
    (2049, "tcp"): "nfs",
    (2049, "udp"): "nfs",
    (2379, "tcp"): "etcd",
    (3306, "tcp"): "mysql",
    (3389, "tcp"): "rdp",
    (5060, "udp"): "sip",
    (5222, "tcp"): "xmpp",
    (5432, "tcp"): "postgresql",
    (5672, "tcp"): "amqp",
    (5900, "tcp"): "vnc",
    (6379, "tcp"): "redis",
    (6443, "tcp"): "k8s-api",
    (8080, "tcp"): "http-alt",
    (8443, "tcp"): "https-alt",
    (9092, "tcp"): "kafka",
    (9200, "tcp"): "elasticsearch",
    (11211, "tcp"): "memcached",
    (27017, "tcp"): "mongodb",
}


def lookup(port: int, proto: str) -> str:
    """Return the service name for *port*/*proto* ("tcp" or "udp"), or ""."""
    return _COMMON_SERVICES.get((port, proto.lower()), "")
