#!/usr/bin/env python3
"""
aesbreak command line

  encrypt / decrypt   AES-128 in ECB, CBC or CTR (ECB/CBC with PKCS#7)
  attack              run one of the oracle attacks against a local victim
                      holding a fresh random key, and print what it recovers
"""
import argparse
import base64
import binascii
import logging
import sys
from pathlib import Path

from .aes import BLOCK
from .attacks import (break_fixed_nonce_ctr, decrypt_ecb_suffix, edit_oracle_decrypt,
                      padding_oracle_decrypt)
from .exceptions import AESBreakError
from .modes import AESModes, cbc_decrypt, cbc_encrypt, ctr
from .oracles import CbcPaddingVictim, CtrEditVictim, EcbSuffixVictim, FixedNonceCtrVictim
from .padding import pkcs7_pad, pkcs7_unpad

ECB_SECRET = base64.b64decode(
    "Um9sbGluJyBpbiBteSA1LjAKV2l0aCBteSByYWctdG9wIGRvd24gc28gbXkg"
    "aGFpciBjYW4gYmxvdwpUaGUgZ2lybGllcyBvbiBzdGFuZGJ5IHdhdmluZyBq"
    "dXN0IHRvIHNheSBoaQpEaWQgeW91IHN0b3A/IE5vLCBJIGp1c3QgZHJvdmUg"
    "YnkK"
)

CBC_MESSAGE = b"A Galois field, also known as a finite field, is a mathematical structure with a finite."

SAMPLE_LINES = [
    b"I have met them at close of day",
    b"Coming with vivid faces",
    b"From counter or desk among grey",
    b"Eighteenth-century houses.",
    b"I have passed with a nod of the head",
    b"Or polite meaningless words,",
    b"Or have lingered awhile and said",
    b"Polite meaningless words,",
    b"And thought before I had done",
    b"Of a mocking tale or a gibe",
    b"To please a companion",
    b"Around the fire at the club,",
    b"Being certain that they and I",
    b"But lived where motley is worn:",
    b"All changed, changed utterly:",
    b"A terrible beauty is born.",
]

# ===============================
# Helpers
# ===============================

def hex_to_bytes(s: str) -> bytes:
    try:
        return binascii.unhexlify(s)
    except (binascii.Error, ValueError):
        raise ValueError("Invalid hex string")


def parse_required_hex(name: str, value: str, expected_len: int) -> bytes:
    b = hex_to_bytes(value)
    if len(b) != expected_len:
        raise ValueError(f"{name} must be {expected_len} bytes (got {len(b)}).")
    return b


def read_input(args) -> bytes:
    if args.in_file:
        return Path(args.in_file).read_bytes()
    if args.hex is not None:
        return hex_to_bytes(args.hex)
    if args.text is not None:
        return args.text.encode("utf-8")
    raise ValueError("Provide one of --in, --text or --hex.")


def write_output(data: bytes, out_file: str | None) -> None:
    if out_file:
        Path(out_file).write_bytes(data)
        print(f"[+] wrote {len(data)} bytes -> {out_file}")
    else:
        print(data.hex())


def show(label: str, data: bytes) -> None:
    try:
        print(f"[+] {label} ({len(data)} bytes):\n{data.decode('utf-8')}")
    except UnicodeDecodeError:
        print(f"[+] {label} ({len(data)} bytes, hex): {data.hex()}")


# ===============================
# encrypt / decrypt
# ===============================

def run_cipher(args) -> int:
    key = parse_required_hex("key", args.key, 16)
    iv = parse_required_hex("iv", args.iv, BLOCK) if args.iv else None
    data = read_input(args)
    encrypting = args.cmd == "encrypt"

    modes = AESModes(key)

    if args.mode == "ecb":
        result = modes.ecb_encrypt(data) if encrypting else modes.ecb_decrypt(data)
    elif args.mode == "cbc" and iv is None:
        # IV || C framing with a fresh random IV
        result = modes.cbc_encrypt(data) if encrypting else modes.cbc_decrypt(data)
    elif args.mode == "cbc":
        if encrypting:
            result = cbc_encrypt(pkcs7_pad(data), key, iv)
        else:
            result = pkcs7_unpad(cbc_decrypt(data, key, iv))
    else:
        result = ctr(data, key, args.nonce)

    write_output(result, args.out)
    return 0


# ===============================
# attacks
# ===============================

def run_attack(args) -> int:
    secret = args.secret.encode("utf-8") if args.secret is not None else None

    if args.target == "ecb":
        victim = EcbSuffixVictim(secret if secret is not None else ECB_SECRET)
        print("[info] byte-at-a-time ECB suffix recovery")
        show("Recovered secret", decrypt_ecb_suffix(victim.encrypt))

    elif args.target == "cbc":
        victim = CbcPaddingVictim()
        iv, ct = victim.encrypt(secret if secret is not None else CBC_MESSAGE)
        print(f"[Victim] IV = {iv.hex()}")
        print(f"[Victim] C  = {ct.hex()} ({len(ct) // BLOCK} blocks)")
        show("Recovered plaintext", padding_oracle_decrypt(ct, iv, victim.padding_oracle))

    elif args.target == "ctr-edit":
        victim = CtrEditVictim()
        ct = victim.encrypt(secret if secret is not None else CBC_MESSAGE)
        print(f"[Victim] C = {ct.hex()}")
        show("Recovered plaintext", edit_oracle_decrypt(ct, victim.edit))

    else:
        if args.lines:
            lines = [ln.encode("utf-8") for ln in Path(args.lines).read_text("utf-8").splitlines() if ln]
        else:
            lines = SAMPLE_LINES
        victim = FixedNonceCtrVictim()
        recovered = break_fixed_nonce_ctr([victim.encrypt(ln) for ln in lines])
        print(f"[info] {len(lines)} messages under one key and nonce")
        for line in recovered:
            print(line.decode("latin-1"))
    return 0


# ===============================
# CLI
# ===============================

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="aesbreak",
        description="AES-128 ECB/CBC/CTR and oracle attacks against their misuse",
    )
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="More logging (-v info, -vv debug)")
    sub = p.add_subparsers(dest="cmd", required=True)

    for name in ("encrypt", "decrypt"):
        sp = sub.add_parser(name, help=f"{name.title()} with AES-128")
        sp.add_argument("--mode", choices=["ecb", "cbc", "ctr"], required=True)
        sp.add_argument("--key", required=True, help="Key (hex, 16 bytes)")
        sp.add_argument("--iv", help="CBC IV (hex, 16 bytes). If omitted, IV||C framing is used.")
        sp.add_argument("--nonce", type=int, default=0, help="CTR nonce (default: 0)")
        src = sp.add_mutually_exclusive_group(required=True)
        src.add_argument("--in", dest="in_file", help="Input file (raw binary)")
        src.add_argument("--text", help="Inline UTF-8 input")
        src.add_argument("--hex", help="Inline hex input")
        sp.add_argument("--out", help="Write result to file (binary); otherwise print hex")
        sp.set_defaults(func=run_cipher)

    atk = sub.add_parser("attack", help="Run an oracle attack against a local victim")
    atk.add_argument("target", choices=["ecb", "cbc", "ctr-edit", "ctr-fixed-nonce"])
    atk.add_argument("--secret", help="Plaintext the victim protects (UTF-8)")
    atk.add_argument("--lines", help="ctr-fixed-nonce: file with one plaintext per line")
    atk.set_defaults(func=run_attack)
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return args.func(args)
    except (AESBreakError, ValueError, OSError) as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
