"""EduTrust — trust & safety and tutor quality evaluation core."""

__version__ = "0.1.0"
