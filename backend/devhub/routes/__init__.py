# Routes package init
"""
DevHub Backend — API Routes Package
=====================================

Route Inventory:
    - portfolio.py:       /api/portfolio        (CRUD, /category/{category})
    - snippets.py:        /api/snippets         (CRUD, /public, /language/{language},
                                                 /tag/{tag}, /upload, /{id}/file-url)
    - learning_notes.py:  /api/learning-notes   (CRUD, /category/{category}, /tag/{tag})
    - files.py:           /api/files/{bucket}/{key}  (signed downloads)
    - health.py:          /health

Routes stay thin: read the request, call a repository or the storage service,
shape the response. Errors are raised as DevHubError subclasses and turned
into JSON by the handlers registered in main.py.
"""
