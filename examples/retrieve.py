from dotenv import load_dotenv
import os

from rje import rje

load_dotenv(override=True) # take environment variables from .env

host = os.getenv("RJE_HOST", "localhost")
port = int(os.getenv("RJE_PORT", "3780"))

# skip to channel A at line 3, channel C at the last line
session = rje.connect(host, port, tape="0:H,3:A,65:C")
try:
    with open("listing.txt", "w") as print_file, \
         open("punch.out", "ab") as punch_file:
        session.retrieve(print_file, punch_file)

finally:
    session.close()

print(f"{session.lines_printed} line(s) printed, "
      f"{session.cards_punched} card(s) punched")
