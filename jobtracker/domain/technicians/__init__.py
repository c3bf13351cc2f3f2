"""Technician domain - technician records and their schedules"""
