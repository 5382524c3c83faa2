import struct
import unittest

from helloworld.codec import GREETING_SIZE, GreetingAccount, decode, encode
from helloworld.errors import DecodeError, ErrorKind


class CodecTests(unittest.TestCase):
    def test_greeting_size_matches_u32(self) -> None:
        self.assertEqual(GREETING_SIZE, 4)
        self.assertEqual(len(encode(GreetingAccount())), 4)

    def test_encode_is_little_endian(self) -> None:
        self.assertEqual(encode(GreetingAccount(counter=1)), b"\x01\x00\x00\x00")
        self.assertEqual(encode(GreetingAccount(counter=0x01020304)), b"\x04\x03\x02\x01")

    def test_round_trip_boundaries(self) -> None:
        for value in (0, 1, 255, 256, 2**31, 2**32 - 1):
            self.assertEqual(decode(encode(GreetingAccount(counter=value))), GreetingAccount(counter=value))

    def test_encode_rejects_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            encode(GreetingAccount(counter=-1))
        with self.assertRaises(ValueError):
            encode(GreetingAccount(counter=2**32))

    def test_decode_rejects_wrong_length(self) -> None:
        for size in (0, 3, 5, 8):
            with self.assertRaises(DecodeError) as ctx:
                decode(bytes(size))
            self.assertEqual(ctx.exception.kind, ErrorKind.DECODE)

    def test_decode_error_names_address(self) -> None:
        with self.assertRaisesRegex(DecodeError, "exactly 4 bytes, got 3") as ctx:
            decode(b"\x01\x02\x03", address="Greet1111")
        self.assertEqual(ctx.exception.address, "Greet1111")

    def test_decode_reads_u32(self) -> None:
        self.assertEqual(decode(struct.pack("<I", 42)).counter, 42)


if __name__ == "__main__":
    unittest.main()
