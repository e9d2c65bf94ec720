from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Date, ForeignKeyConstraint, Integer, Numeric, PrimaryKeyConstraint, String, Text, UniqueConstraint, func, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
import datetime
import decimal

# bigint identity on PostgreSQL, rowid alias on SQLite
BigIntPK = BigInteger().with_variant(Integer, "sqlite")

class Base(DeclarativeBase):
    pass


class Anneescolaire(Base):
    __tablename__ = 'anneescolaire'
    __mapper_args__ = {'eager_defaults': True}
    __table_args__ = (
        PrimaryKeyConstraint('idanneescolaire', name='anneescolaire_pkey'),
    )

    idanneescolaire: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    libelle: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(Text, server_default=text("'en cours'"))
    datedebut: Mapped[datetime.date] = mapped_column(Date)
    datefin: Mapped[datetime.date] = mapped_column(Date)


class Option(Base):
    __tablename__ = 'option'
    __table_args__ = (
        PrimaryKeyConstraint('idoption', name='option_pkey'),
    )

    idoption: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    nomoption: Mapped[str] = mapped_column(Text)
    abreviation: Mapped[str] = mapped_column(Text)


class Classe(Base):
    __tablename__ = 'classe'
    __table_args__ = (
        ForeignKeyConstraint(['idoption'], ['option.idoption'], ondelete='RESTRICT', name='classe_idoption_fkey'),
        PrimaryKeyConstraint('idclasse', name='classe_pkey')
    )

    idclasse: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    nomclasse: Mapped[str] = mapped_column(Text)
    niveau: Mapped[Optional[str]] = mapped_column(Text)
    idoption: Mapped[int] = mapped_column(BigInteger)

    option: Mapped['Option'] = relationship('Option')


class Parent(Base):
    __tablename__ = 'parent'
    __table_args__ = (
        PrimaryKeyConstraint('idparent', name='parent_pkey'),
    )

    idparent: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    nompere: Mapped[str] = mapped_column(Text)
    nommere: Mapped[str] = mapped_column(Text)
    adresse: Mapped[Optional[str]] = mapped_column(Text)
    emailpere: Mapped[Optional[str]] = mapped_column(Text)
    emailmere: Mapped[Optional[str]] = mapped_column(Text)
    professionpere: Mapped[Optional[str]] = mapped_column(Text)
    professionmere: Mapped[Optional[str]] = mapped_column(Text)
    telephonepere: Mapped[Optional[str]] = mapped_column(Text)
    telephonemere: Mapped[Optional[str]] = mapped_column(Text)


class Eleve(Base):
    __tablename__ = 'eleve'
    __mapper_args__ = {'eager_defaults': True}
    __table_args__ = (
        ForeignKeyConstraint(['idparent'], ['parent.idparent'], ondelete='RESTRICT', name='eleve_idparent_fkey'),
        PrimaryKeyConstraint('ideleve', name='eleve_pkey')
    )

    ideleve: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    nom: Mapped[str] = mapped_column(Text)
    postnom: Mapped[str] = mapped_column(Text)
    prenom: Mapped[Optional[str]] = mapped_column(Text)
    datenaissance: Mapped[Optional[datetime.date]] = mapped_column(Date)
    lieunaissance: Mapped[Optional[str]] = mapped_column(Text)
    adresse: Mapped[Optional[str]] = mapped_column(Text)
    moyentransport: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(Text, server_default=text("'en cours'"))
    photo: Mapped[Optional[str]] = mapped_column(Text)
    idparent: Mapped[Optional[int]] = mapped_column(BigInteger)

    parent: Mapped[Optional['Parent']] = relationship('Parent')

    # Read-only: rows are removed by the database (ON DELETE CASCADE)
    inscriptions: Mapped[list['Inscription']] = relationship(
        'Inscription',
        viewonly=True,
        order_by='Inscription.dateinscription'
    )


class Frais(Base):
    __tablename__ = 'frais'
    __table_args__ = (
        ForeignKeyConstraint(['idanneescolaire'], ['anneescolaire.idanneescolaire'], ondelete='SET NULL', name='frais_idanneescolaire_fkey'),
        PrimaryKeyConstraint('idfrais', name='frais_pkey')
    )

    idfrais: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(Text)
    montanttotal: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2))
    dateecheance: Mapped[Optional[datetime.date]] = mapped_column(Date)
    idanneescolaire: Mapped[Optional[int]] = mapped_column(BigInteger)

    anneescolaire: Mapped[Optional['Anneescolaire']] = relationship('Anneescolaire')


class Inscription(Base):
    __tablename__ = 'inscription'
    __mapper_args__ = {'eager_defaults': True}
    __table_args__ = (
        ForeignKeyConstraint(['ideleve'], ['eleve.ideleve'], ondelete='CASCADE', name='inscription_ideleve_fkey'),
        ForeignKeyConstraint(['idclasse'], ['classe.idclasse'], ondelete='CASCADE', name='inscription_idclasse_fkey'),
        ForeignKeyConstraint(['idanneescolaire'], ['anneescolaire.idanneescolaire'], ondelete='CASCADE', name='inscription_idanneescolaire_fkey'),
        PrimaryKeyConstraint('ideleve', 'idclasse', 'idanneescolaire', name='inscription_pkey')
    )

    ideleve: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    idclasse: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    idanneescolaire: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    dateinscription: Mapped[datetime.datetime] = mapped_column(DateTime(True), server_default=func.now())

    eleve: Mapped['Eleve'] = relationship('Eleve')
    classe: Mapped['Classe'] = relationship('Classe')
    anneescolaire: Mapped['Anneescolaire'] = relationship('Anneescolaire')


class Paiement(Base):
    __tablename__ = 'paiement'
    __mapper_args__ = {'eager_defaults': True}
    __table_args__ = (
        ForeignKeyConstraint(['ideleve'], ['eleve.ideleve'], ondelete='SET NULL', name='paiement_ideleve_fkey'),
        ForeignKeyConstraint(['idfrais'], ['frais.idfrais'], ondelete='SET NULL', name='paiement_idfrais_fkey'),
        PrimaryKeyConstraint('idpaiement', name='paiement_pkey')
    )

    idpaiement: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    montantpayer: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2))
    datepaiement: Mapped[datetime.datetime] = mapped_column(DateTime(True), server_default=func.now())
    status: Mapped[str] = mapped_column(Text, server_default=text("'pending'"))
    ideleve: Mapped[Optional[int]] = mapped_column(BigInteger)
    idfrais: Mapped[Optional[int]] = mapped_column(BigInteger)

    eleve: Mapped[Optional['Eleve']] = relationship('Eleve')
    frais: Mapped[Optional['Frais']] = relationship('Frais')


class Notification(Base):
    __tablename__ = 'notification'
    __mapper_args__ = {'eager_defaults': True}
    __table_args__ = (
        ForeignKeyConstraint(['idparent'], ['parent.idparent'], ondelete='RESTRICT', name='notification_idparent_fkey'),
        PrimaryKeyConstraint('idnotification', name='notification_pkey')
    )

    idnotification: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    message: Mapped[str] = mapped_column(Text)
    dateenvoi: Mapped[datetime.datetime] = mapped_column(DateTime(True), server_default=func.now())
    idparent: Mapped[Optional[int]] = mapped_column(BigInteger)

    parent: Mapped[Optional['Parent']] = relationship('Parent')


class Users(Base):
    __tablename__ = 'users'
    __mapper_args__ = {'eager_defaults': True}
    __table_args__ = (
        ForeignKeyConstraint(['idparent'], ['parent.idparent'], ondelete='SET NULL', name='users_idparent_fkey'),
        PrimaryKeyConstraint('id', name='users_pkey'),
        UniqueConstraint('email', name='users_email_key')
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255))
    password: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(Text, server_default=text("'admin'"))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=text('true'))
    idparent: Mapped[Optional[int]] = mapped_column(BigInteger)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime(True), server_default=func.now())
