"""Core domain package for streamcollect.

Core contains the subscription rule, admission filtering, and record
formatting without any transport or process-specific code, keeping the
business logic portable.
"""
