"""
Interactive CLI for the MedLedger.
Log in as an identity and run ledger operations as text commands.
"""

import shlex
from typing import Optional, Tuple

from medledger.audit import audit_report
from medledger.config import DB_URI, NO_EXPIRY
from medledger.errors import LedgerError
from medledger.events import PrintEventSink
from medledger.ledger import Ledger
from medledger.seed import seed_demo_ledger
from medledger.storage import open_store

HELP = """Commands:
  login <identity>                     switch caller
  whoami | profile [identity]
  register patient|hospital <name>     register the caller
  register doctor <hospital> <name>
  vet|suspend|unsuspend <doctor>       hospital actions
  roster [hospital] | stats [hospital]
  grant <hospital> [expiry|+seconds]   patient actions
  revoke <hospital>
  access <patient> <hospital>
  add <patient> <type> <data>          doctor actions
  update <record_id> <data>
  get <record_id> | records [patient]
  toggle | transfer <identity> | system
  audit | seed | help | quit"""


def parse_expiry(value: str, now: int) -> int:
    """Absolute epoch seconds, or `+N` relative to now; `never` means no expiry."""
    if value.lower() in {"never", "0"}:
        return NO_EXPIRY
    if value.startswith("+"):
        return now + int(value[1:])
    return int(value)


def run_command(ledger: Ledger, caller: Optional[str], line: str) -> Tuple[Optional[str], str]:
    """Execute one command line. Returns (caller, output)."""
    parts = shlex.split(line)
    if not parts:
        return caller, ""
    cmd, args = parts[0].lower(), parts[1:]

    if cmd == "help":
        return caller, HELP
    if cmd == "login":
        return args[0], f"[auth] Acting as: {args[0]}"
    if cmd == "seed":
        created = seed_demo_ledger(ledger)
        return caller, "\n".join(f"{role}: {', '.join(ids)}" for role, ids in created.items())
    if cmd == "audit":
        return caller, audit_report(ledger.sink.events)
    if cmd == "system":
        config = ledger.system_status()
        return caller, f"admin={config.admin} active={config.active} records={ledger.record_count()}"
    if cmd == "access":
        return caller, str(ledger.has_access(args[0], args[1]))
    if cmd == "profile":
        p = ledger.profile(args[0] if args else caller)
        return caller, (f"{p.identity} name={p.name!r} role={p.role} custodian={p.custodian} "
                        f"verified={p.verified} active={p.active} suspended={p.suspended}")

    if caller is None:
        raise ValueError("Not logged in. Use: login <identity>")

    if cmd == "whoami":
        return caller, caller
    if cmd == "register":
        role = args[0].lower()
        if role == "doctor":
            ledger.register(caller, role, " ".join(args[2:]), custodian=args[1])
        else:
            ledger.register(caller, role, " ".join(args[1:]))
        return caller, f"Registered {caller} as {role}."
    if cmd == "vet":
        ledger.vet_doctor(caller, args[0])
        return caller, f"Vetted {args[0]}."
    if cmd == "suspend":
        ledger.suspend_doctor(caller, args[0])
        return caller, f"Suspended {args[0]}."
    if cmd == "unsuspend":
        ledger.unsuspend_doctor(caller, args[0])
        return caller, f"Unsuspended {args[0]}."
    if cmd == "roster":
        return caller, "\n".join(ledger.roster_of(args[0] if args else caller)) or "(empty roster)"
    if cmd == "stats":
        stats = ledger.hospital_stats(args[0] if args else caller)
        return caller, ", ".join(f"{k}={v}" for k, v in stats.items())
    if cmd == "grant":
        expiry = parse_expiry(args[1], ledger.clock()) if len(args) > 1 else NO_EXPIRY
        p = ledger.grant_access(caller, args[0], expiry)
        return caller, f"Granted {p.hospital} access (expires_at={p.expires_at or 'never'})."
    if cmd == "revoke":
        ledger.revoke_access(caller, args[0])
        return caller, f"Revoked access for {args[0]}."
    if cmd == "add":
        record_id = ledger.add_record(caller, args[0], " ".join(args[2:]), args[1])
        return caller, f"Created record #{record_id}."
    if cmd == "update":
        ledger.update_record(caller, int(args[0]), " ".join(args[1:]))
        return caller, f"Updated record #{args[0]}."
    if cmd == "get":
        r = ledger.get_record(caller, int(args[0]))
        return caller, (f"#{r.record_id} [{r.record_type}] patient={r.patient} doctor={r.doctor} "
                        f"hospital={r.hospital} created_at={r.created_at}\n{r.data}")
    if cmd == "records":
        ids = ledger.records_of(caller, args[0]) if args else ledger.my_records(caller)
        return caller, ", ".join(str(i) for i in ids) or "(no records)"
    if cmd == "toggle":
        active = ledger.toggle_system(caller)
        return caller, f"System is now {'active' if active else 'paused'}."
    if cmd == "transfer":
        ledger.transfer_admin(caller, args[0])
        return caller, f"Admin transferred to {args[0]}."

    raise ValueError(f"Unknown command '{cmd}'. Type 'help'.")


def main():
    print("=== MedLedger: authorization & record-custody console ===\n")

    store = open_store(DB_URI)
    ledger = Ledger(store=store, sink=PrintEventSink())
    print(f"[init] System admin: {ledger.system_status().admin}")

    # ── Login ────────────────────────────────────────────────────────
    try:
        caller = input("Enter your identity (or 'quit'): ").strip()
    except (EOFError, KeyboardInterrupt):
        print("\nExiting.")
        return

    if not caller or caller.lower() in {"quit", "exit"}:
        print("Goodbye.")
        return

    print(f"\n[auth] Acting as: {caller}")
    print("Type 'help' for commands.")

    # ── REPL ─────────────────────────────────────────────────────────
    while True:
        try:
            line = input(f"\n{caller}> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break

        if not line:
            continue
        if line.lower() in {"quit", "exit"}:
            print("Goodbye.")
            break

        try:
            caller, output = run_command(ledger, caller, line)
        except LedgerError as e:
            print(f"[DENIED] {e.kind}: {e}")
            continue
        except (ValueError, IndexError) as e:
            print("[ERROR] Could not run command.")
            print("Details:", e)
            continue

        if output:
            print(output)


if __name__ == "__main__":
    main()
