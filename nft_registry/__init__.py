# NFT registry package
