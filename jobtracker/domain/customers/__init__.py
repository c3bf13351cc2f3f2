"""Customer domain - customer records and their job history"""
