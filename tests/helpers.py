import uuid

TEST_PASSWORD = "TestPassword123!"

# smallest valid PNG: 1x1 transparent pixel
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def unique_email() -> str:
    return f"user-{uuid.uuid4().hex[:10]}@example.com"
