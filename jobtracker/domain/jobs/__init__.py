"""Job domain - job records and the status lifecycle"""
