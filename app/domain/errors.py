# app/domain/errors.py
"""
Wyjatki domenowe. Dziedzicza po wbudowanych typach, ktore routery
juz mapuja na statusy HTTP (ValueError -> 400, RuntimeError -> 500).
"""


class InvalidQuantityError(ValueError):
    pass


class EmptyCartError(ValueError):
    pass


class TotalMismatchError(ValueError):
    def __init__(self, expected, given):
        super().__init__(f"Order total {given} does not match cart total {expected}")
        self.expected = expected
        self.given = given


class InvalidTotalError(ValueError):
    """Kwota zamowienia nie jest poprawna liczba."""


class DuplicateUserError(ValueError):
    pass


class InvalidCredentialsError(ValueError):
    pass


class CartItemRejectedError(ValueError):
    """Baza odrzucila pozycje koszyka (np. FK do nieistniejacego produktu)."""


class CatalogConsistencyError(RuntimeError):
    """Pozycja koszyka wskazuje na produkt, ktorego nie ma w katalogu."""


class OrderCreationError(RuntimeError):
    pass


class CheckoutInProgressError(RuntimeError):
    pass


class ProductInUseError(RuntimeError):
    """Produkt wciaz wskazywany przez pozycje koszyka lub zamowienia."""
