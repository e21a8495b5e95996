"""
API module - FastAPI dla klienta gry (prezentacja poza silnikiem).

Uruchomienie:
    uvicorn lighthouse.api.main:app --reload
"""
