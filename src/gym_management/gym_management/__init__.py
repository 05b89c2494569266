"""Gym Management package.

Organised by feature modules (users, memberships, attendance, payments, ...)
with a thin Flask controller layer over service/repository layers.
"""
