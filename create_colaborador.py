"""Create a staff account, or reset its password if the email already exists.

    python create_colaborador.py --email ana@ipca.pt --nome "Ana Silva"
"""
import argparse
import getpass
import sys

from sqlmodel import Session, select

from db import create_db_and_tables, engine
from models import Colaborador
from routers.auth import hash_password


def upsert_colaborador(session: Session, email: str, nome: str, password: str) -> Colaborador:
    colaborador = session.exec(
        select(Colaborador).where(Colaborador.email == email)
    ).first()

    if colaborador:
        colaborador.password_hash = hash_password(password)
        if nome:
            colaborador.nome = nome
        print(f"Updated existing colaborador: {email}")
    else:
        colaborador = Colaborador(nome=nome or email, email=email, password_hash=hash_password(password))
        print(f"Created colaborador: {email}")

    session.add(colaborador)
    session.commit()
    session.refresh(colaborador)
    return colaborador


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--email", required=True)
    parser.add_argument("--nome", default="")
    parser.add_argument("--password", help="prompted for when omitted")
    parser.add_argument("--create-tables", action="store_true")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Password must not be empty", file=sys.stderr)
        return 1

    if args.create_tables:
        create_db_and_tables()

    with Session(engine) as session:
        upsert_colaborador(session, args.email, args.nome, password)
    return 0


if __name__ == "__main__":
    sys.exit(main())
