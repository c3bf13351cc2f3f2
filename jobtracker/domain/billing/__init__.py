"""Billing domain - invoices, payments and balance tracking"""
