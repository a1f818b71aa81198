"""
Domain services: uploads, scanning, spam checks, notifications, email.
"""
