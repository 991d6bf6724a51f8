# main.py

# Environment dari .env harus dimuat sebelum imaps.config dibaca
from dotenv import load_dotenv
load_dotenv(override=True)

from imaps import create_app

# Uvicorn memanggil factory ini (uvicorn main:app --factory)
app = create_app
