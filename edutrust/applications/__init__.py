from edutrust.applications.gate import ApplicationGate, ApplicationStatus, initial_status

__all__ = ["ApplicationGate", "ApplicationStatus", "initial_status"]
