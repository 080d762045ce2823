from wishlist_crawler.cli import main

main()
