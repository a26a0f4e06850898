"""LabNexus package.

Laboratory equipment inventory organized by feature modules (equipment,
users, schedules, job requests, ...) over a storage layer with two
interchangeable backends and a thin Flask controller layer.
"""
