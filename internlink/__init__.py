"""InternLink: storage-backed data layer matching startups' internships with students."""

__version__ = "0.1.0"
