"""
Core business logic components.

This package contains the admission-control components:
- Log path existence checks
- Configuration validation
- Client address normalization
- Page-view (PV) filter
- Admission service, metrics and admin authentication
"""
