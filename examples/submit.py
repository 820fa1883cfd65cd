from dotenv import load_dotenv
import os
import sys

from rje import rje

load_dotenv(override=True) # take environment variables from .env

host = os.getenv("RJE_HOST", "localhost")
port = int(os.getenv("RJE_PORT", "3780"))
jobno = os.getenv("RJE_JOBNO", "600001")

deck = """\
//HELLO    JOB (ACCT),'HELLO',CLASS=A,MSGCLASS=A
//STEP1    EXEC PGM=IEBGENER
//SYSPRINT DD SYSOUT=A
//SYSUT1   DD *
HELLO, WORLD
/*
//SYSUT2   DD SYSOUT=A
//SYSIN    DD DUMMY
""".splitlines()

with rje.connect(host, port) as session:
    if not session.submit(jobno, deck):
        sys.exit(f"host ended the session, job {jobno} not submitted")

    print(f"job {jobno}: {session.bytes_sent} bytes sent")
