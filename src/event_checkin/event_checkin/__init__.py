"""Event Check-in package.

Feature modules (attendees, checkin, bulk) each keep a thin Flask controller
on top of service/repository layers; the container wires them together.
"""
