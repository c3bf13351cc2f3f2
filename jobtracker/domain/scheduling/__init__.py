"""Scheduling domain - technician appointments and double-booking checks"""
