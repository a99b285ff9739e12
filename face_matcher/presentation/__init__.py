"""Face Matcher Presentation Layer"""
