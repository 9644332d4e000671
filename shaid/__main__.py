from shaid.main import shaid

shaid()
