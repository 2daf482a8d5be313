"""Front desk application for the MediQueue backend.

This package contains the queue ledger and state machine, the
pre-registration intake, their HTTP views and the route table consumed
by the front-end application.
"""
