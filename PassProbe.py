#!/usr/bin/env python3
"""
PassProbe - Credential Hygiene Toolkit

Features:
- SHA-256 (or any hashlib algorithm) password digests
- Exhaustive numeric PIN recovery (multi-threaded, range partitioned)
- Password strength policy (single and batch)
- Secure policy-compliant password generation
- CSV credential store loading
- Interactive login session
"""

import argparse
import getpass
import hashlib
import secrets
import string
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum

from colorama import init, Fore, Style

init(autoreset=True)

__version__ = '1.0.0'

DEFAULT_ALGORITHM = 'sha256'
DEFAULT_WIDTH = 6
DEFAULT_THREADS = 4
DEFAULT_LENGTH = 12
DEFAULT_STORE = 'data/user_hashpwd.csv'

DEMO_TARGET = 'a97755204f392b4d8787b38d898671839b4a770a864e52862055cdbdf5bc5bee'
SAMPLE_PASSWORDS = ['Abc5', 'abcdef123456', 'AbCdEf123456', 'AbCdEf 123456']

MIN_STRONG_LENGTH = 12
MIN_GENERATED_LENGTH = 4

UPPER_CHARS = string.ascii_uppercase
LOWER_CHARS = string.ascii_lowercase
DIGIT_CHARS = string.digits
SPECIAL_CHARS = '!@#$%^&*()-_+=<>?'


class PassProbeError(Exception):
    """Base class for PassProbe errors"""


class AlgorithmUnavailable(PassProbeError):
    """The digest backend cannot provide the requested algorithm"""

    def __init__(self, algorithm, reason=None):
        self.algorithm = algorithm
        message = f"Hash algorithm '{algorithm}' is not available"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class StoreUnavailable(PassProbeError):
    """The credential store could not be read"""


class CharacterClass(Enum):
    UPPER = 'upper'
    LOWER = 'lower'
    DIGIT = 'digit'
    SPECIAL = 'special'
    WHITESPACE = 'whitespace'


def character_class(char):
    """Classify a single character, or None for anything unclassified"""
    if char.isupper():
        return CharacterClass.UPPER
    if char.islower():
        return CharacterClass.LOWER
    if char.isdecimal():
        return CharacterClass.DIGIT
    if char.isspace():
        return CharacterClass.WHITESPACE
    if char in string.punctuation:
        return CharacterClass.SPECIAL
    return None


# Console output

def info(msg):
    print(f"{Fore.CYAN}[*] {msg}")


def success(msg):
    print(f"{Fore.GREEN}[+] {msg}")


def warning(msg):
    print(f"{Fore.YELLOW}[!] {msg}")


def error(msg):
    print(f"{Fore.RED}[-] {msg}")


class DigestEngine:
    """One-way hex digest of arbitrary bytes"""

    def __init__(self, algorithm=DEFAULT_ALGORITHM):
        self.algorithm = algorithm.lower()
        try:
            probe = hashlib.new(self.algorithm)
        except (ValueError, TypeError) as e:
            raise AlgorithmUnavailable(self.algorithm, str(e)) from e

        # Variable-length digests (shake_*) have no fixed output size
        if probe.digest_size == 0:
            raise AlgorithmUnavailable(self.algorithm, 'variable-length digest')
        self.digest_length = probe.digest_size * 2

    def hash(self, data):
        """Hash raw bytes to a lowercase hex string"""
        return hashlib.new(self.algorithm, data).hexdigest()

    def hash_text(self, text):
        """Hash a string, UTF-8 encoded"""
        return self.hash(text.encode('utf-8'))

    def __repr__(self):
        return f"DigestEngine({self.algorithm!r})"


def zero_pad(value, width):
    return f"{value:0{width}d}"


def split_range(total, parts):
    """Split [0, total) into contiguous (start, end) pairs.

    The last pair absorbs the remainder, so together the pairs cover every
    value exactly once in ascending order. Empty pairs are dropped when there
    are more parts than values.
    """
    if parts < 1:
        raise ValueError("Number of parts must be at least 1")

    size = total // parts
    ranges = []
    for i in range(parts):
        start = i * size
        end = start + size if i < parts - 1 else total
        if end > start:
            ranges.append((start, end))
    return ranges


class CrackResult:
    """Outcome of an exhaustive search"""

    def __init__(self, candidate, attempts, elapsed):
        self.candidate = candidate
        self.attempts = attempts
        self.elapsed = elapsed

    @property
    def found(self):
        return self.candidate is not None

    @property
    def rate(self):
        return self.attempts / self.elapsed if self.elapsed > 0 else 0.0

    def __repr__(self):
        return (f"CrackResult(candidate={self.candidate!r}, "
                f"attempts={self.attempts}, elapsed={self.elapsed:.3f})")


class BruteForcer:
    """Exhaustive search over zero-padded numeric candidates"""

    def __init__(self, engine=None, partitions=1):
        if partitions < 1:
            raise ValueError("partitions must be at least 1")
        self.engine = engine or DigestEngine()
        self.partitions = partitions

    def _scan(self, target, width, start, end, stop):
        """Scan [start, end) in ascending order.

        Returns (candidate or None, attempts). Stops early once another
        worker has set the stop event.
        """
        hash_text = self.engine.hash_text
        attempts = 0
        for i in range(start, end):
            if stop.is_set():
                break
            candidate = zero_pad(i, width)
            attempts += 1
            if hash_text(candidate) == target:
                stop.set()
                return candidate, attempts
        return None, attempts

    def crack(self, target, width):
        if width < 1:
            raise ValueError("width must be at least 1")

        start_time = time.time()
        total = 10 ** width
        stop = threading.Event()
        ranges = split_range(total, self.partitions)

        if len(ranges) == 1:
            candidate, attempts = self._scan(target, width, 0, total, stop)
            return CrackResult(candidate, attempts, time.time() - start_time)

        candidate = None
        attempts = 0
        with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
            futures = [
                executor.submit(self._scan, target, width, start, end, stop)
                for start, end in ranges
            ]
            try:
                for future in as_completed(futures):
                    found, count = future.result()
                    attempts += count
                    if found is not None and candidate is None:
                        candidate = found
            finally:
                stop.set()

        return CrackResult(candidate, attempts, time.time() - start_time)

    def search(self, target, width):
        """Return the candidate whose digest equals target, or None"""
        return self.crack(target, width).candidate


class StrengthReport:
    """Per-rule breakdown of a password against the strength policy"""

    def __init__(self, password):
        self.length = len(password)
        classes = {character_class(c) for c in password}
        self.has_upper = CharacterClass.UPPER in classes
        self.has_lower = CharacterClass.LOWER in classes
        self.has_digit = CharacterClass.DIGIT in classes
        self.has_special = CharacterClass.SPECIAL in classes
        self.has_whitespace = CharacterClass.WHITESPACE in classes

    @property
    def long_enough(self):
        return self.length >= MIN_STRONG_LENGTH

    @property
    def strong(self):
        return (self.long_enough and self.has_upper and self.has_lower
                and self.has_digit and not self.has_whitespace)

    @property
    def feedback(self):
        feedback = []
        if self.long_enough:
            feedback.append(f"[+] Length {self.length} (min {MIN_STRONG_LENGTH})")
        else:
            feedback.append(f"[-] Too short: {self.length} chars (min {MIN_STRONG_LENGTH})")

        for present, label in ((self.has_upper, 'uppercase letter'),
                               (self.has_lower, 'lowercase letter'),
                               (self.has_digit, 'digit')):
            if present:
                feedback.append(f"[+] Has {label}")
            else:
                feedback.append(f"[-] Missing {label}")

        if self.has_whitespace:
            feedback.append("[-] Contains whitespace")
        return feedback


class StrengthPolicy:
    """Fixed strong-password rule set"""

    @staticmethod
    def analyze(password):
        return StrengthReport(password)

    @staticmethod
    def evaluate(password):
        """True when the password satisfies every rule.

        Rules: at least 12 characters, one uppercase, one lowercase, one
        digit, and no whitespace anywhere. Special characters are optional.
        """
        if len(password) < MIN_STRONG_LENGTH:
            return False
        return StrengthReport(password).strong

    @staticmethod
    def classify_batch(passwords):
        """Map each distinct password to its verdict.

        Keyed by password, so repeated inputs collapse to a single entry.
        Use classify_each when every occurrence matters.
        """
        return {password: StrengthPolicy.evaluate(password) for password in passwords}

    @staticmethod
    def classify_each(passwords):
        """(password, verdict) pairs aligned with the input order"""
        return [(password, StrengthPolicy.evaluate(password)) for password in passwords]


class PasswordGenerator:
    """Generate secure passwords"""

    CLASSES = (UPPER_CHARS, LOWER_CHARS, DIGIT_CHARS, SPECIAL_CHARS)
    ALL_CHARS = UPPER_CHARS + LOWER_CHARS + DIGIT_CHARS + SPECIAL_CHARS

    _random = secrets.SystemRandom()

    @staticmethod
    def generate(length=DEFAULT_LENGTH):
        """Random password with at least one upper, lower, digit and special.

        Lengths below 4 are raised to 4.
        """
        length = max(length, MIN_GENERATED_LENGTH)

        chars = [secrets.choice(charset) for charset in PasswordGenerator.CLASSES]
        chars.extend(secrets.choice(PasswordGenerator.ALL_CHARS)
                     for _ in range(length - len(chars)))

        PasswordGenerator._random.shuffle(chars)
        return ''.join(chars)


class StoreLoadResult:
    """Users loaded from a credential store, or why none were"""

    def __init__(self, users=None, error=None):
        self.users = users if users is not None else {}
        self.error = error

    @property
    def ok(self):
        return self.error is None

    def require(self):
        """Return the users, raising StoreUnavailable if loading failed"""
        if self.error is not None:
            raise StoreUnavailable(self.error)
        return self.users

    def __len__(self):
        return len(self.users)


class CredentialStore:
    """username -> digest mapping read from a CSV file"""

    @staticmethod
    def parse_lines(lines):
        """Build the mapping from raw lines. The first line is a header."""
        users = {}
        for i, line in enumerate(lines):
            if i == 0:
                continue
            parts = line.rstrip('\r\n').split(',')
            # Trailing empty fields don't count: "alice,hash," is two fields
            while parts and parts[-1] == '':
                parts.pop()
            if len(parts) == 2:
                users[parts[0].strip()] = parts[1].strip()
        return users

    @staticmethod
    def load(path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                users = CredentialStore.parse_lines(f)
        except (OSError, UnicodeDecodeError) as e:
            return StoreLoadResult(error=f"Error loading file: {e}")
        return StoreLoadResult(users)


class LoginState(Enum):
    PROMPTING_USER = 'prompting_user'
    PROMPTING_PASSWORD = 'prompting_password'
    VERIFYING = 'verifying'
    SUCCESS = 'success'
    RETRY = 'retry'


class LoginSession:
    """Interactive username/password check against a credential store.

    Each state has a handler that performs its I/O and returns the next
    state. Input ending (EOFError) aborts the session.
    """

    def __init__(self, users, engine=None, read_line=input,
                 read_secret=getpass.getpass, write=print, max_attempts=None):
        self.users = users
        self.engine = engine or DigestEngine()
        self.read_line = read_line
        self.read_secret = read_secret
        self.write = write
        self.max_attempts = max_attempts

        self.state = LoginState.PROMPTING_USER
        self.username = None
        self.password = None
        self.failures = 0
        self.handlers = {
            LoginState.PROMPTING_USER: self.prompt_user,
            LoginState.PROMPTING_PASSWORD: self.prompt_password,
            LoginState.VERIFYING: self.verify,
            LoginState.RETRY: self.retry,
        }

    def prompt_user(self):
        self.username = self.read_line('Enter username: ').strip()
        if self.username in self.users:
            return LoginState.PROMPTING_PASSWORD
        self.write('Username not found. Please try again.')
        return LoginState.RETRY

    def prompt_password(self):
        self.password = self.read_secret('Enter password: ').strip()
        return LoginState.VERIFYING

    def verify(self):
        stored = self.users[self.username]
        hashed = self.engine.hash_text(self.password)
        self.password = None
        if hashed == stored:
            self.write('Login successful!')
            return LoginState.SUCCESS
        self.write('Incorrect password. Please try again.')
        return LoginState.RETRY

    def retry(self):
        self.username = None
        return LoginState.PROMPTING_USER

    def step(self):
        """Run the current state's handler and advance. SUCCESS is terminal."""
        if self.state is LoginState.SUCCESS:
            return self.state
        self.state = self.handlers[self.state]()
        if self.state is LoginState.RETRY:
            self.failures += 1
        return self.state

    def run(self):
        """Loop until login succeeds. Returns False if input runs out."""
        while self.state is not LoginState.SUCCESS:
            if (self.max_attempts is not None and self.state is LoginState.RETRY
                    and self.failures >= self.max_attempts):
                return False
            try:
                self.step()
            except EOFError:
                return False
        return True


# Demo selectors

class Selector(Enum):
    BRUTE_FORCE = '1'
    CHECK_EACH = '2'
    CHECK_BATCH = '3'
    GENERATE = '4'


def run_brute_force(args):
    engine = DigestEngine(args.algorithm)
    forcer = BruteForcer(engine, partitions=args.threads)

    info(f"Target: {args.target}")
    info(f"Space: {10 ** args.width:,} candidates ({args.width} digits)")
    info(f"Threads: {args.threads}")

    result = forcer.crack(args.target, args.width)
    if result.found:
        success(f"PIN FOUND: {result.candidate}")
    else:
        error("No result found")
    info(f"Attempts: {result.attempts:,} in {result.elapsed:.2f}s ({result.rate:.0f} h/s)")
    return result


def run_check_each(args):
    width = max(len(p) for p in SAMPLE_PASSWORDS)
    for password in SAMPLE_PASSWORDS:
        print(f"{password:<{width}} -> {StrengthPolicy.evaluate(password)}")


def run_check_batch(args):
    for password, strong in StrengthPolicy.classify_batch(SAMPLE_PASSWORDS).items():
        print(f"{password} -> {strong}")


def run_generate(args):
    password = PasswordGenerator.generate(args.length)
    print(f"Generated password: {Fore.YELLOW}{password}")
    return password


HANDLERS = {
    Selector.BRUTE_FORCE: run_brute_force,
    Selector.CHECK_EACH: run_check_each,
    Selector.CHECK_BATCH: run_check_batch,
    Selector.GENERATE: run_generate,
}


def run_selector(token, args):
    """Run one selector token. Unknown tokens are reported and skipped."""
    print(f"\nQ{token}\n" + "-" * 20)
    try:
        selector = Selector(token)
    except ValueError:
        error(f"Invalid selector: {token}")
        return False
    HANDLERS[selector](args)
    return True


def run_strength(args):
    report = StrengthPolicy.analyze(args.strength)
    if report.strong:
        print(f"{Fore.CYAN}Strength: {Fore.GREEN}STRONG")
    else:
        print(f"{Fore.CYAN}Strength: {Fore.RED}WEAK")

    print(f"\n{Fore.CYAN}Details:")
    print(f"  Length: {report.length}")
    print(f"  Lowercase: {'✓' if report.has_lower else '✗'}")
    print(f"  Uppercase: {'✓' if report.has_upper else '✗'}")
    print(f"  Digits: {'✓' if report.has_digit else '✗'}")
    print(f"  Special: {'✓' if report.has_special else '✗'}")
    print(f"  Whitespace: {'✓' if report.has_whitespace else '✗'}\n")

    print(f"{Fore.CYAN}Feedback:")
    for item in report.feedback:
        print(f"  {item}")
    return report.strong


def run_login(args, read_line=input, read_secret=getpass.getpass):
    result = CredentialStore.load(args.login)
    if not result.ok:
        if args.strict_store:
            result.require()
        error(result.error)
    info(f"Loaded {len(result):,} users from {args.login}")

    session = LoginSession(result.users, DigestEngine(args.algorithm),
                           read_line=read_line, read_secret=read_secret)
    if not session.run():
        warning("Login aborted")
        return False
    return True


def print_banner():
    """Print PassProbe banner"""
    banner = f"""
{Fore.CYAN}+--------------------------------------------+
|  {Fore.RED}PassProbe{Fore.CYAN} - Credential Hygiene Toolkit     |
|  {Fore.YELLOW}v{__version__}{Fore.CYAN}                                    |
+--------------------------------------------+{Style.RESET_ALL}
"""
    print(banner)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='passprobe',
        description='PassProbe - Credential Hygiene Toolkit',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Selectors:
  1  Brute-force a 6-digit PIN digest
  2  Check sample passwords one by one
  3  Check sample passwords as a batch
  4  Generate a 12-character password

Examples:
  # Run every selector
  passprobe

  # Brute-force a custom target with 8 threads
  passprobe 1 --target 8d969eef6ecad3c29a3a629280e686cf0c3f5d5a86aff3ca12020c923adc6c92 --threads 8

  # Generate a 20-character password
  passprobe 4 -l 20

  # Log in against a credential store
  passprobe --login data/user_hashpwd.csv
        '''
    )

    parser.add_argument('selectors', nargs='*', metavar='SELECTOR',
                        help='Selectors to run (1-4), default: all')

    parser.add_argument('--target', default=DEMO_TARGET, help='Digest to brute-force')
    parser.add_argument('--width', type=int, default=DEFAULT_WIDTH, help='PIN digit width')
    parser.add_argument('--threads', type=int, default=DEFAULT_THREADS, help='Number of threads')
    parser.add_argument('-a', '--algorithm', default=DEFAULT_ALGORITHM,
                        help='Hash algorithm (md5, sha1, sha256, sha512, ...)')
    parser.add_argument('-l', '--length', type=int, default=DEFAULT_LENGTH,
                        help='Generated password length')
    parser.add_argument('--login', nargs='?', const=DEFAULT_STORE, metavar='CSV',
                        help='Run an interactive login against a credential store')
    parser.add_argument('--strength', metavar='PASSWORD',
                        help='Show a per-rule strength report for one password')
    parser.add_argument('--strict-store', action='store_true',
                        help='Fail if the credential store cannot be read')
    parser.add_argument('--no-banner', action='store_true', help='Hide banner')
    parser.add_argument('-v', '--version', action='version', version=f'PassProbe v{__version__}')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.width < 1:
        parser.error('--width must be at least 1')
    if args.threads < 1:
        parser.error('--threads must be at least 1')

    if not args.no_banner:
        print_banner()

    try:
        if args.login:
            return 0 if run_login(args) else 1

        if args.strength is not None:
            run_strength(args)
            return 0

        tokens = args.selectors or [s.value for s in Selector]
        for token in tokens:
            run_selector(token, args)
    except PassProbeError as e:
        error(str(e))
        sys.exit(1)

    return 0


if __name__ == "__main__":
    sys.exit(main())
