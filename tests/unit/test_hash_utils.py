"""해싱 유틸리티 유닛 테스트"""
from catmatch.utils.hash_utils import generate_attribute_cache_key, generate_match_cache_key, hash_string


class TestHashUtils:
    """해싱 유틸리티 테스트"""

    def test_hash_string_consistency(self):
        """동일한 입력에 대한 일관성"""
        assert hash_string("Kadın Elbise") == hash_string("Kadın Elbise")

    def test_hash_string_different_inputs(self):
        assert hash_string("iPhone 15") != hash_string("iPhone 16")

    def test_hash_string_length(self):
        """MD5 해시 길이 확인 (32자)"""
        assert len(hash_string("test")) == 32


class TestMatchCacheKey:
    """매칭 캐시 키"""

    def test_format(self):
        key = generate_match_cache_key("hepsiburada", "Kadın Elbise", "", 5)
        assert key.startswith("match:hepsiburada:")
        assert len(key) == len("match:hepsiburada:") + 32

    def test_normalized_title(self):
        """대소문자/튀르키예어 문자/기호 차이는 같은 키"""
        key1 = generate_match_cache_key("temu", "Kadın Elbise!", "", 5)
        key2 = generate_match_cache_key("temu", "kadin  elbise", "", 5)
        assert key1 == key2

    def test_top_n_in_key(self):
        """결과 개수가 다르면 다른 키"""
        key1 = generate_match_cache_key("temu", "Kadın Elbise", "", 5)
        key2 = generate_match_cache_key("temu", "Kadın Elbise", "", 1)
        assert key1 != key2

    def test_marketplace_in_key(self):
        key1 = generate_match_cache_key("temu", "Kadın Elbise", "", 5)
        key2 = generate_match_cache_key("trendyol", "Kadın Elbise", "", 5)
        assert key1 != key2

    def test_description_prefix_only(self):
        """설명은 앞부분만 키에 반영"""
        prefix = "a" * 200
        key1 = generate_match_cache_key("temu", "Elbise", prefix + " yazlik", 5)
        key2 = generate_match_cache_key("temu", "Elbise", prefix + " kislik", 5)
        key3 = generate_match_cache_key("temu", "Elbise", "yazlik", 5)
        assert key1 == key2
        assert key1 != key3


class TestAttributeCacheKey:
    def test_format(self):
        assert generate_attribute_cache_key("trendyol", 511) == "attributes:trendyol:511"
