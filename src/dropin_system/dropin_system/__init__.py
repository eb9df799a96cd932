"""Drop-in System package.

Feature modules (customers, attendance, dropins, languages, statistics, users)
each carry a thin Flask controller layer over service/repository layers.
"""
