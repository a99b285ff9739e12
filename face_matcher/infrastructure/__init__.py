"""Face Matcher Infrastructure Layer"""
