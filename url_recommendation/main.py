import sys

from .interface.api_interface import get_liked_urls, recommend_urls


def demo_user_recommendation(user: str):
    print(f"=== User {user} liked urls ===")
    for u in get_liked_urls(user):
        print(f"{u['url']} (numLikes={u['numLikes']})")

    print(f"=== User {user} Recommendations ===")
    result = recommend_urls(user)
    if result is None:
        print("→ 추천 결과가 없습니다.")
        return
    for hit in result["hits"]:
        print(f"{hit['url']} (score={hit['score']:.4f}, likes={hit['numLikesTotal']})")


if __name__ == "__main__":
    demo_user_recommendation(sys.argv[1] if len(sys.argv) > 1 else "aaaaaaaaaaaaaaa")
