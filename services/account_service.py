from models.account import Account, AccountType
from database.account_dao import AccountDAO
from utils.errors import ValidationError


class AccountService:
    def __init__(self, account_dao: AccountDAO, default_currency: str = "USD"):
        self._dao = account_dao
        self._default_currency = default_currency

    def get_all(self) -> list[Account]:
        return self._dao.get_all()

    def get_by_id(self, account_id: int) -> Account | None:
        return self._dao.get_by_id(account_id)

    def get_by_name(self, name: str) -> Account | None:
        """None means no such account; storage faults still raise."""
        return self._dao.get_by_name((name or "").strip())

    def get_by_type(self, *types: AccountType) -> list[Account]:
        return self._dao.get_by_type(*types)

    def create(self, name: str, type_, currency: str | None = None) -> Account:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name cannot be empty.")
        if self._dao.get_by_name(name):
            raise ValidationError(f"An account named '{name}' already exists.")
        try:
            account_type = AccountType.coerce(type_)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        currency = (currency or self._default_currency).strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError(f"Invalid currency code '{currency}'.")
        return self._dao.create(name, account_type, currency)

    def delete(self, account_id: int):
        if self._dao.has_splits(account_id):
            raise ValidationError(
                "Cannot delete an account with existing postings. "
                "Remove its transactions first."
            )
        self._dao.delete(account_id)
