"""
Enrollment Gateway - Tuition Payment & Cohort Assignment Service

A FastAPI-based microservice that schedules tuition installments,
reconciles payment-gateway callbacks and assigns paid learners
to fixed-capacity cohorts.
"""

__version__ = "0.1.0"
