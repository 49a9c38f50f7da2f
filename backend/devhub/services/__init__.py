# Services package init
"""
DevHub Backend — Services Package
===================================

What:  Data-access and storage logic, independent of HTTP concerns.

Services:
    - repository.py:       PortfolioRepository, SnippetRepository, LearningNoteRepository
    - storage_service.py:  blob locators, upload / delete / exists / signed URLs
    - validation.py:       required-field and range checks run before any store call
    - lookup.py:           Found / ABSENT point-lookup results
"""
