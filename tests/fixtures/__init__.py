"""테스트 데이터 패키지"""
