from mop_gen_core.config import get_settings
from mop_gen_core.db.database import init_db


def main():
    init_db()
    print(f"✅ DB creada/verificada usando DATABASE_URL ({get_settings().database_url}).")


if __name__ == "__main__":
    main()
