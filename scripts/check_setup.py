"""
Script para verificar que estén los archivos que necesitan los emails.
Ejecutar: python scripts/check_setup.py
"""
import os
import sys

# Obtener el path del directorio del script y subir un nivel
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.dirname(SCRIPT_DIR)
PACKAGE_DIR = os.path.join(BACKEND_DIR, "artisan_doors")

REQUIRED_FILES = [
    "styles/global.css",
    "services/email_templates.py",
    "services/template_manager.py",
]


def check_setup(package_dir: str = PACKAGE_DIR) -> bool:
    all_files_found = True

    for relative_path in REQUIRED_FILES:
        if os.path.exists(os.path.join(package_dir, relative_path)):
            print(f"✅ Encontrado {relative_path}")
        else:
            print(f"❌ Falta {relative_path}")
            all_files_found = False

    if all_files_found:
        print("Todos los archivos necesarios están presentes.")
    else:
        print("⚠️ Faltan archivos necesarios. Revisar la salida anterior.")
    return all_files_found


if __name__ == "__main__":
    sys.exit(0 if check_setup() else 1)
