"""Face Matcher Domain Layer"""
